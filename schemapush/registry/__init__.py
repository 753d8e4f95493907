"""Registry — HTTP side of a push session.

- Keys: issue and revoke temporary write keys (legacy servers)
- Request: build upload requests for self-describing schemas
- Uploader: send requests and classify the server's answer
"""
