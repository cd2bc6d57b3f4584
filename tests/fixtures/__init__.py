"""Reusable fakes and builders for the rendezvous test suite."""
