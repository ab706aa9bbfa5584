"""Test suite for the CHC Insight session and cache core."""
