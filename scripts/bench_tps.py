import os
import shutil
import tempfile
import time

from microsql import MicroSQL


def main() -> None:
    data_dir = os.path.join(tempfile.gettempdir(), "microsql_tps_bench")
    if os.path.exists(data_dir):
        shutil.rmtree(data_dir)

    db = MicroSQL(data_dir)
    n = 500

    start = time.perf_counter()
    for i in range(1, n + 1):
        db.execute(f'INSERT INTO bench (id, v) VALUES ({i}, "x, y")')
    insert_seconds = time.perf_counter() - start

    start = time.perf_counter()
    for i in range(1, n + 1):
        db.execute(f"SELECT id FROM bench WHERE id = {i}")
    select_seconds = time.perf_counter() - start

    print(f"Rows per phase: {n}")
    print(f"INSERT TPS: {n / insert_seconds:.2f}")
    print(f"SELECT TPS: {n / select_seconds:.2f}")
    print(f"TOTAL TPS: {2 * n / (insert_seconds + select_seconds):.2f}")


if __name__ == "__main__":
    main()
