#!/usr/bin/env python3

from __future__ import annotations

from repocdn.cli import cli


def main():
    try:
        cli(prog_name="repocdn")
    except KeyboardInterrupt:
        # print empty line so terminal prompt doesn't end up on the end of some
        # of our own program output
        print()


if __name__ == "__main__":
    main()
