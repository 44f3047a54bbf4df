"""Example program for Waveshare ePaper displays."""
