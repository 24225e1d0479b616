"""
Integration tests for the hired-candidate onboarding flow.

These tests serve the Pinpoint and HiBob APIs from an in-process mock
transport and drive the webhook handler end to end (parser, workflow,
remote clients and response mapping).
"""
