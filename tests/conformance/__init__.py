"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the redeemable shop.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. atomicity.py - Rejected commands leave every observable unchanged
2. pricing.py - Linear price of the next unit
3. conservation.py - Double-entry accounting of currency and units
4. idempotency.py - Duplicate execution handling and command nonces
5. temporal.py - Purchase deadlines and clock control

These tests use hypothesis for property-based testing.
"""
