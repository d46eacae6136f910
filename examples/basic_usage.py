"""Basic Mistral client usage."""
from mistral_client import MistralClient, Model

client = MistralClient.from_env()

result = client.chat(
    [{"role": "user", "content": "What are the key differences between Python 3.12 and 3.13?"}],
    model=Model.SMALL,
    temperature=0.3,
)
print(f"Result: {result.choices[0].message.content}")
print(f"Tokens used: {result.usage.total_tokens}")
print(f"Finish reason: {result.choices[0].finish_reason}")

moderation = client.moderate("I want to learn about networking")
print(f"Flagged: {moderation.results[0].is_flagged()}")
