"""Example of registering a custom function step and running a small graph.

Function steps are deterministic: they read state and return a partial update.
No generation service is called here, so no API key is needed.

    python examples/01_custom_function_step.py
"""

import asyncio

from newsframes.core import Config
from newsframes.cortex.engine.builder import build_pipeline
from newsframes.cortex.engine.runner import PipelineRunner
from newsframes.cortex.services.generation import GenerationClient
from newsframes.cortex.state import Channel, ChannelRegistry, append
from newsframes.cortex.steps.context import StepContext
from newsframes.cortex.steps.functions import register_function


@register_function("word_count")
def word_count(state, ctx, params):
    """Count the words of the headline."""
    words = (state.get("input_headline") or "").split()
    return {"word_count": len(words), "notes": [f"{len(words)} words"]}


@register_function("shout")
def shout(state, ctx, params):
    return {"shouted": (state.get("input_headline") or "").upper(), "notes": ["shouted"]}


GRAPH = {
    "name": "example",
    "entry": "count",
    "steps": [
        {"id": "count", "kind": "function", "function": "word_count", "output_key": "word_count"},
        {"id": "loud", "kind": "function", "function": "shout", "output_key": "shouted"},
    ],
    "edges": [
        {"source": "count", "target": "loud"},
        {"source": "loud", "target": "END"},
    ],
}

CHANNELS = ChannelRegistry(
    {
        "input_headline": Channel(),
        "word_count": Channel(default=int),
        "shouted": Channel(),
        "notes": Channel(merge=append, default=list),
    }
)


async def main():
    config = Config()
    context = StepContext(client=GenerationClient(config), channels=CHANNELS, errors_channel=None)
    pipeline = build_pipeline(GRAPH, context)

    state = await PipelineRunner(pipeline, step_limit=5).run(
        {"input_headline": "Dog attacks 4-year-old causing injuries"}
    )
    print(f"Word count: {state['word_count']}")
    print(f"Shouted: {state['shouted']}")
    print(f"Notes: {state['notes']}")


if __name__ == "__main__":
    asyncio.run(main())
