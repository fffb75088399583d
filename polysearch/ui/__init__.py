"""Графіки процесу розв'язання."""
