# -*- coding: utf-8 -*-

"""
Main entry point for running Linked Source from a source checkout.
"""

import logging
import sys

from linked_source.cli import main

if __name__ == '__main__':
    code = main()
    logging.info("===== Application terminated =====")
    sys.exit(code)
