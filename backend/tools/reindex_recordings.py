#!/usr/bin/env python3
"""Rebuild the recordings search index once.

Usage:
  python tools/reindex_recordings.py
"""
import logging

from rasclat.jobs.reindex import reindex_recordings

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def main():
    count = reindex_recordings()
    print(f'indexed {count} recordings')


if __name__ == '__main__':
    main()
