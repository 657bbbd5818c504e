"""Shared domain models and utilities for MindWatch services."""
