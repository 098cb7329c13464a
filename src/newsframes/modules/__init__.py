"""Provider modules: LLM backends and persistence stores."""
