import logging

import numpy as np

from hmqc import HMQCPipeline, ContentType
from hmqc.config import load_config

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

config = load_config()
pipeline = HMQCPipeline(config)

# --------------------------------------------------
# Synthetic payloads per content type
# --------------------------------------------------
rng = np.random.default_rng(7)

text = b"It is the one thing that you can see in the house of our king. " * 60

gradient = np.add.outer(np.arange(64), np.arange(64)).astype(np.uint8)
image = np.repeat(gradient[:, :, None], 3, axis=2).tobytes()

t = np.arange(16000)
audio = (3000 * np.sin(2 * np.pi * 440 * t / 16000)).astype("<i2").tobytes()

binary = rng.integers(0, 256, size=8000, dtype=np.uint8).tobytes()

payloads = [
    ("text", ContentType.TEXT, text),
    ("image", ContentType.IMAGE, image),
    ("audio", ContentType.AUDIO, audio),
    ("binary", ContentType.BINARY, binary),
]

# --------------------------------------------------
# Encode, decode and report
# --------------------------------------------------
print("content_type,original,compressed,ratio,side,utilisation,roundtrip")

for name, content_type, payload in payloads:
    matrix, meta = pipeline.encode_with_metadata(payload, content_type)
    surface = pipeline.render(matrix)
    result = pipeline.decode_surface(surface, matrix.side)

    print(
        f"{name},{meta['original_size']},{meta['compressed_size']},"
        f"{meta['compression_ratio']},{meta['matrix_side']},"
        f"{meta['utilisation']},{result.payload == payload}"
    )
