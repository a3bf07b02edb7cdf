"""Run configuration, the analysis pipeline and its exceptions."""
