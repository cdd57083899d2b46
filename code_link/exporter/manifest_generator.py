"""Generate manifest.json."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from code_link import __version__
from code_link.models import LinkResult


def generate_manifest(result: LinkResult, source_dir: Path, output_dir: Path) -> Path:
    """Write a manifest.json describing the build order and the files written."""
    buckets = []
    for index, bucket in enumerate(result.order):
        buckets.append({
            "bucket": index,
            "modules": [
                {
                    "name": module.name,
                    "source": module.source,
                    "exports": list(module.exports),
                }
                for module in bucket
            ],
        })

    manifest = {
        "version": __version__,
        "generated": datetime.now().isoformat(),
        "source_directory": str(source_dir),
        "total_modules": result.number_of_modules,
        "total_dependencies": result.number_of_dependencies,
        "buckets": buckets,
        "stats": result.stats.to_dict(),
        "files_created": [str(f) for f in result.files_created],
    }

    manifest_path = output_dir / "manifest.json"
    manifest_path.write_text(
        json.dumps(manifest, indent=2) + "\n",
        encoding="utf-8",
    )
    return manifest_path
