"""Runnable examples built on partialio."""
