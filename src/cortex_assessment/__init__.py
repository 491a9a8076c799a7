"""CORTEX AI maturity assessment engine.

Deterministic scoring and insight generation for the CORTEX self-assessment:
pillar maturity scores, context-triggered compliance gates, executive
insights and priorities, and value-overlay metric defaults.
"""

__version__ = "0.1.0"
