"""Conformance scenarios for the favorites API.

Each module exercises one area of the contract end to end: the request is
encoded, sent over HTTP, and the response checked by the scenario runner.
"""
