"""Template engine plus the Render and Link stages."""
