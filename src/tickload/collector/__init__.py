"""Metric collection on top of the CPU load sampler."""
