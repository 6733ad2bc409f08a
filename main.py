#!/usr/bin/env python3
"""Batch sketch recognition over a folder of drawings."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Dict

from sketch_recognition import RecognitionService, load_settings
from sketch_recognition.config import configure_logging

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.gif', '.tiff', '.webp'}


def analyze_images_in_folder(folder_path: str, service: RecognitionService) -> dict:
    """Run every image in the folder through the recognition service.

    Args:
        folder_path: folder holding the drawings
        service: configured recognition service

    Returns:
        mapping of file name to the result dictionary
    """
    folder = Path(folder_path)
    if not folder.exists():
        print(f"❌ Folder not found: {folder_path}")
        return {}

    image_files = sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in IMAGE_EXTENSIONS
    )
    if not image_files:
        print(f"⚠️  No images found in: {folder_path}")
        return {}

    print(f"📁 Found {len(image_files)} images")
    print(f"🤖 Backend: {service.backend}\n")
    print("=" * 80)

    all_results = {}
    for idx, image_file in enumerate(image_files, 1):
        print(f"\n[{idx}/{len(image_files)}] {image_file.name}")
        result = service.recognize(image_file)
        if result.success:
            category = f" ({result.category})" if result.category else ""
            print(f"  ✅ {result.prediction}{category}: {result.confidence}%")
            for alternative in result.alternatives:
                print(f"     - {alternative.name}: {alternative.score:.0%}")
        else:
            print(f"  ❌ {result.message}")
        all_results[image_file.name] = result.to_dict()

    print("\n" + "=" * 80)
    print(f"\n✨ Done, processed {len(image_files)} images\n")
    return all_results


def summarize(results: Dict[str, dict]) -> dict:
    """Count predictions per category and failures."""
    category_counts: Dict[str, int] = {}
    failures = 0
    for data in results.values():
        if not data.get("success"):
            failures += 1
            continue
        category = data.get("category", "uncategorized")
        category_counts[category] = category_counts.get(category, 0) + 1

    return {
        "total": len(results),
        "recognized": len(results) - failures,
        "failed": failures,
        "categories": category_counts,
    }


def print_summary(summary: dict):
    print("\n" + "=" * 80)
    print("📊 Summary")
    print("=" * 80)
    print(f"\nTotal images: {summary['total']}")
    print(f"  - recognized: {summary['recognized']}")
    print(f"  - failed: {summary['failed']}")
    if summary["categories"]:
        print("\nPredictions per category:")
        for category, count in sorted(summary["categories"].items(), key=lambda x: x[1], reverse=True):
            print(f"  - {category}: {count}")
    print("\n" + "=" * 80)


def save_results_to_json(results: dict, output_file: str = "analysis_results.json"):
    """Write results and their summary as JSON."""
    payload = {"results": results, "summary": summarize(results)}
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    print(f"💾 Results saved to: {output_file}")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    script_dir = Path(__file__).parent
    images_folder = Path(argv[0]) if argv else script_dir / "test-images"
    config_file = argv[1] if len(argv) > 1 else str(script_dir / "config.json")

    settings = load_settings(config_file)
    configure_logging(settings.log_level)
    service = RecognitionService(settings=settings)

    print("\n" + "=" * 80)
    print("🖼️  Batch sketch recognition")
    print("=" * 80)
    print(f"📂 Image folder: {images_folder}")
    print(f"📄 Config file: {config_file}\n")

    results = analyze_images_in_folder(str(images_folder), service)
    if results:
        print_summary(summarize(results))
        save_results_to_json(results, str(script_dir / "analysis_results.json"))


if __name__ == "__main__":
    main()
