"""
Deterministic pricing engine.

Pure Python math. No I/O.
Given room measurements, paint products and a company's pricing config,
produce an itemized painting quote with materials, labor, overhead, markup,
tax, total and a timeline.
"""
