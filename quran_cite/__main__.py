"""Quran Cite: look up the verse a line of Arabic recites"""
import asyncio
import logging
import sys

from .core import find_verse_reference


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("Usage: python -m quran_cite <arabic text>")
        return 2

    logging.basicConfig(level=logging.INFO)
    text = " ".join(argv)
    print(f"🎙 {text}")
    ref = asyncio.run(find_verse_reference(text))
    if ref is None:
        print("🔍 No Quran verse detected.")
        return 0
    print(f"📖 {ref.reference}  ({ref.confidence:.0%}, {ref.longest_consecutive_run} consecutive words)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
