"""Servicios del Core: normalización, agregación y pipeline."""
