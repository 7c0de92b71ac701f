#!/usr/bin/env python3
"""
Fraud Detection Training Script
===============================

Runs the fraud detector from a source checkout without installing it:

    python scripts/train.py bank_data.csv

"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from fraud_detector.cli import main


if __name__ == "__main__":
    sys.exit(main())
