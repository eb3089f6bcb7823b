"""Overworld: map layout for repository collections.

Stages, in the order a host runs them:

  sizing   derive each item's size from repository metrics
  layout   bucket items by age and pack them into a grid of regions

Rendering the placed items is left to the host.
"""
