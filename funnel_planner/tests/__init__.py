"""Tests for the Funnel Planner backend."""
