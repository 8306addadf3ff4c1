"""Billing: plan catalogue, limit enforcement, proration and Stripe integration."""
