"""Tests for the installer-assets command line tool."""
