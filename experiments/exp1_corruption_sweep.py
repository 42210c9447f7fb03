import csv
import logging
from pathlib import Path

import numpy as np

from hmqc import HMQCPipeline, ContentType, HMQCError
from hmqc.config import load_config
from hmqc.module4_layout import data_mask, nominal_corners

logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

# --------------------------------------------------
# Load config (shipped defaults + optional override)
# --------------------------------------------------
CONFIG_PATH = Path(__file__).resolve().parent / "experiment_config.yaml"
config = load_config(str(CONFIG_PATH) if CONFIG_PATH.exists() else None)

pipeline = HMQCPipeline(config)
rng = np.random.default_rng(2024)

# --------------------------------------------------
# Encode one multi-codeword payload
# --------------------------------------------------
payload = rng.integers(0, 256, size=4000, dtype=np.uint8).tobytes()
matrix, meta = pipeline.encode_with_metadata(payload, ContentType.BINARY, timestamp=0, instance_id=0)
stream_size = meta["stream_size"]
corners = nominal_corners(matrix.side)
positions = np.flatnonzero(data_mask(matrix.side))

print(f"side={matrix.side} blocks={meta['num_blocks']} stream={stream_size}")

# --------------------------------------------------
# Sweep symbol error rate over the codeword stream
# --------------------------------------------------
rates = [0.0, 0.01, 0.02, 0.04, 0.05, 0.06, 0.07, 0.08, 0.10]
trials = 5
results = []

for rate in rates:
    recovered = 0
    corrected = 0
    for _ in range(trials):
        damaged = matrix.copy()
        flat = damaged.modules.reshape(-1)
        num_errors = int(stream_size * rate)
        for offset in rng.choice(stream_size, size=num_errors, replace=False).tolist():
            shift = (3 - offset % 4) * 8
            flat[positions[offset // 4]] ^= np.uint32(int(rng.integers(1, 256)) << shift)

        try:
            result = pipeline.decode(damaged, corners)
        except HMQCError as e:
            logging.info("rate %.3f: %s", rate, e)
            continue
        recovered += int(result.payload == payload)
        corrected += result.corrected_errors

    results.append((rate, recovered / trials, corrected / trials))
    print(f"{rate},{recovered / trials:.2f},{corrected / trials:.1f}")

# --------------------------------------------------
# Save CSV
# --------------------------------------------------
OUT = Path("experiments/results_corruption_sweep.csv")
OUT.parent.mkdir(exist_ok=True)

with open(OUT, "w", newline="") as f:
    writer = csv.writer(f)
    writer.writerow(["symbol_error_rate", "recovery_rate", "mean_corrected"])
    writer.writerows(results)

print(f"Saved corruption sweep -> {OUT}")
