"""Built-in LLM providers (imported lazily by the model registry)."""
