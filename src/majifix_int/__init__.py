"""Billing backend integration adapter."""
