"""
Vercel serverless function entry point for the Kazi dashboard.

This file exposes the Flask app as a Vercel serverless function.
Vercel automatically handles the WSGI interface.
"""

import sys
from pathlib import Path

# Add project root to path so the packages import when Vercel runs this file directly
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from frontend.app import app  # noqa: E402

# Vercel expects the app to be named 'app' or 'handler'
