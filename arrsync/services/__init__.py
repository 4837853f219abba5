"""
Application services layer.

Stores hold the in-memory collections of one server instance together with
their fetch/command status flags. They coordinate calls to the API client
port, classify failures and notify subscribers after every mutation.

Services depend on ports (interfaces) from core/, never on concrete
implementations from adapters/.
"""
