import os


class TimingLog:
    """Append-only timing logs kept in ``log_dir``.

    A single run appends its label and elapsed milliseconds, on two lines,
    to ``<name>_results.txt``. A sweep appends one line per worker count
    to ``<name>_performance.txt``.
    """

    def __init__(self, log_dir: str = ".") -> None:
        self.log_dir = log_dir

    def resultsPath(self, name: str) -> str:
        return os.path.join(self.log_dir, f"{name}_results.txt")

    def performancePath(self, name: str) -> str:
        return os.path.join(self.log_dir, f"{name}_performance.txt")

    def _append(self, path: str, text: str) -> None:
        os.makedirs(self.log_dir, exist_ok=True)
        with open(path, 'a', encoding='utf-8') as f:
            f.write(text)

    def record_run(self, name: str, label: str, elapsed_ms: int) -> None:
        self._append(self.resultsPath(name), f"{label}\n{elapsed_ms}\n")

    def record_sweep(self, name: str, workers: int, elapsed_ms: int, itemsets: int) -> None:
        self._append(self.performancePath(name),
                     f"Workers: {workers}, Time: {elapsed_ms} ms, Itemsets: {itemsets}\n")
