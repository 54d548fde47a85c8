"""Gradio UI shell for Image Weaver.

- models: per-session UIState and UI constants
- handlers: event handlers (plain functions over UIState)
- app: Blocks layout and the standalone ``main()`` entry point
"""
