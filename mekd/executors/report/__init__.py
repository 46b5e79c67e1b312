"""Result formatting and dual-axis chart output."""
