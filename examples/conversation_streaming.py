"""Conversation streaming example with raw event dicts."""
import asyncio

from mistral_client import AsyncMistralClient, ConversationRequest


async def main() -> None:
    async with AsyncMistralClient.from_env() as client:
        request = ConversationRequest(inputs="Tell me a short joke", model="mistral-medium-latest")
        async for event in client.stream_conversation(request):
            if event.get("type") == "message.output.delta":
                print(event.get("content", ""), end="", flush=True)
        print()


asyncio.run(main())
