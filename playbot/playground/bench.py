"""Micro-benchmark harness generation."""

from .errors import NoCandidatesError

PUB_FN_MARKER = "pub fn "

# convenience import for users
HARNESS_PRELUDE = "#![feature(test)] #[allow(unused_imports)] use std::hint::black_box;\n"

HARNESS_BENCH_FN = r"""
fn bench(functions: &[(&str, fn())]) {
    const CHUNK_SIZE: usize = 10000;

    // Warm up
    for (_, function) in functions.iter() {
        for _ in 0..CHUNK_SIZE {
            (function)();
        }
    }

    let mut functions_chunk_times = functions.iter().map(|_| Vec::new()).collect::<Vec<_>>();

    let start = std::time::Instant::now();
    while (std::time::Instant::now() - start).as_secs() < 5 {
        for (chunk_times, (_, function)) in functions_chunk_times.iter_mut().zip(functions) {
            let start = std::time::Instant::now();
            for _ in 0..CHUNK_SIZE {
                (function)();
            }
            chunk_times.push((std::time::Instant::now() - start).as_secs_f64() / CHUNK_SIZE as f64);
        }
    }

    for (chunk_times, (function_name, _)) in functions_chunk_times.iter().zip(functions) {
        let mean_time: f64 = chunk_times.iter().sum::<f64>() / chunk_times.len() as f64;
        let standard_deviation: f64 = f64::sqrt(
            chunk_times
                .iter()
                .map(|time| (time - mean_time).powi(2))
                .sum::<f64>()
                / chunk_times.len() as f64,
        );

        println!(
            "{}: {:.0} iters per second ({:.1}ns±{:.1})",
            function_name,
            1.0 / mean_time,
            mean_time * 1_000_000_000.0,
            standard_deviation * 1_000_000_000.0,
        );
    }
}

fn main() {
"""

BLACK_BOX_HINT = "Hint: use the black_box function to prevent computations from being optimized out\n"


def find_public_functions(code: str) -> list[str]:
    """Names of every `pub fn` in the snippet, in order of appearance.

    An occurrence with no `(` after it is skipped.
    """
    names = []
    start = code.find(PUB_FN_MARKER)
    while start != -1:
        name_start = start + len(PUB_FN_MARKER)
        paren = code.find("(", name_start)
        if paren != -1:
            names.append(code[name_start:paren].strip())
        start = code.find(PUB_FN_MARKER, name_start)
    return names


def build_harness(code: str) -> str:
    """Embed the snippet in a program that times each public function.

    Raises:
        NoCandidatesError: the snippet has no public functions
    """
    names = find_public_functions(code)
    if not names:
        raise NoCandidatesError("No public functions found for benchmarking 🤔")

    entries = "".join(f'("{name}", {name}), ' for name in names)
    return f"{HARNESS_PRELUDE}{code}{HARNESS_BENCH_FN}bench(&[{entries}]);\n}}\n"


def needs_black_box_hint(code: str) -> bool:
    return "black_box" not in code
