"""Dependency resolution and manifest assembly for ROS packages and stacks."""
