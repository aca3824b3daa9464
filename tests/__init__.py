"""
Test Suite for Echo Chamber

This package contains tests for:
- Engine: validator, detector, comparator, store, analyzer
- Hosts: FastAPI server, httpx client, CLI
- Support: presets, logging configuration, preset validation script
"""
