"""SEASCAPE booking lifecycle service."""
