#!/usr/bin/env python3
"""
SkillFlow - Main entry point.

This is a thin wrapper around the CLI.

Usage:
    python main.py --help
    python main.py validate ./workflow.json
    python main.py run ./workflow.json --simulate -i node-1.topic="LLM agents"
    python main.py templates export research-report -o report.json
"""

from skillflow.cli import main

if __name__ == "__main__":
    main()
