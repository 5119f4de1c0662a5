import json
import os

import numpy as np

from orbital_sampler import as_vertices

RAW_SUFFIXES = (".bin", ".f32")


def default_filename(orbital, directory="orbitals", suffix=".json"):
    name = str(orbital).replace(":", "_").replace(",", "_")
    return os.path.join(directory, f"orbital_{name}{suffix}")


def save_point_cloud(cloud, filename, metadata=None):
    """Write a flat point cloud as viewer JSON or as a raw float32 vertex buffer."""
    cloud = np.asarray(cloud, dtype=np.float32)
    ext = os.path.splitext(filename)[1].lower()
    if ext != ".json" and ext not in RAW_SUFFIXES:
        raise ValueError(f"Unsupported point cloud format {ext!r}; use .json, .bin or .f32")

    out_dir = os.path.dirname(filename)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    if ext == ".json":
        payload = dict(metadata or {})
        payload["count"] = cloud.size // 3
        payload["points"] = as_vertices(cloud).tolist()
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(payload, f)
    else:
        # little-endian x, y, z per vertex, no header
        cloud.astype("<f4").tofile(filename)

    return filename


def load_point_cloud(filename):
    ext = os.path.splitext(filename)[1].lower()
    if ext == ".json":
        with open(filename, encoding="utf-8") as f:
            data = json.load(f)
        return np.asarray(data["points"], dtype=np.float32).reshape(-1)
    if ext in RAW_SUFFIXES:
        return np.fromfile(filename, dtype="<f4").astype(np.float32)
    raise ValueError(f"Unsupported point cloud format {ext!r}; use .json, .bin or .f32")
