"""Streaming response example."""
from mistral_client import MistralClient, Model

client = MistralClient.from_env()

print("Streaming response:")
for chunk in client.stream_chat(
    [{"role": "user", "content": "Count from 1 to 10, one number per line"}],
    model=Model.SMALL,
    stop="\n4.",
):
    if chunk.choices:
        print(chunk.choices[0].delta.content or "", end="", flush=True)
print()  # newline at end
