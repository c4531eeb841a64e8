#!/usr/bin/env python3
"""
Print the PlayHub catalogue: one line per category with the number of games
its page can list, plus the trailers and hidden games it holds back.

    python3 scripts/list_db.py [--taxonomy game]
"""
import argparse
import sys

import database


def main():
    parser = argparse.ArgumentParser(description='Summarise the PlayHub catalogue')
    parser.add_argument('--taxonomy', default='game', help='Category taxonomy to list')
    args = parser.parse_args()

    if database.SessionLocal is None:
        print('Database engine not available; check DATABASE_URL')
        return 1

    db = database.SessionLocal()
    try:
        rows = database.catalogue_summary(db, args.taxonomy)
    finally:
        db.close()

    if not rows:
        print(f"No '{args.taxonomy}' categories")
        return 0
    print(f"{'slug':<20} {'listed':>7} {'videos':>7} {'hidden':>7}")
    for row in rows:
        print(f"{row['slug']:<20} {row['listed']:>7} {row['videos']:>7} {row['hidden']:>7}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
