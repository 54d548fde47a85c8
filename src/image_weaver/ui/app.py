"""Gradio UI for Image Weaver."""

import logging

import gradio as gr

from image_weaver.core.config import DEFAULT_VARIATIONS, MAX_VARIATIONS, MIN_VARIATIONS, config
from image_weaver.core.intake import ACCEPTED_EXTENSIONS

from .handlers import (
    begin_generation,
    cancel_delete,
    confirm_delete,
    copy_image_url,
    download_image,
    end_generation,
    handle_upload,
    request_delete,
    select_result,
)
from .models import DELETE_CONFIRM_BODY, DELETE_CONFIRM_TITLE, DOWNLOAD_FILENAME, UIState

logger = logging.getLogger(__name__)

# Browser-side actions.  Both receive the selected URL and return it
# unchanged so the Python handler still gets it as its input.
COPY_JS = """
(url) => {
    if (url) {
        navigator.clipboard.writeText(url);
    }
    return url;
}
"""

DOWNLOAD_JS = f"""
(url) => {{
    if (url) {{
        const link = document.createElement('a');
        link.href = url;
        link.download = '{DOWNLOAD_FILENAME}';
        document.body.appendChild(link);
        link.click();
        document.body.removeChild(link);
    }}
    return url;
}}
"""


def create_ui() -> gr.Blocks:
    """Create the Image Weaver Gradio Blocks app.

    Returns:
        The (unlaunched) Gradio Blocks app
    """
    app = gr.Blocks(title="Image Weaver")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState())

        gr.Markdown("# Image Weaver")

        with gr.Row():
            with gr.Column(scale=1):
                file_input = gr.File(
                    label="Drag 'n' drop an image here, or click to select one",
                    file_types=list(ACCEPTED_EXTENSIONS),
                    file_count="single",
                    type="filepath",
                )
                count_slider = gr.Slider(
                    label="Number of variations",
                    minimum=MIN_VARIATIONS,
                    maximum=MAX_VARIATIONS,
                    step=1,
                    value=DEFAULT_VARIATIONS,
                )
            with gr.Column(scale=1):
                preview = gr.Image(
                    label="Uploaded",
                    type="filepath",
                    interactive=False,
                    height=300,
                )

        status = gr.Markdown(value="*Drop an image to get started*")

        gallery = gr.Gallery(
            label="Variations",
            columns=3,
            object_fit="cover",
            allow_preview=True,
        )

        with gr.Row():
            selected_url = gr.Textbox(
                label="Selected image URL",
                interactive=False,
                scale=3,
            )
            copy_btn = gr.Button("Copy URL", variant="secondary", scale=1)
            download_btn = gr.Button("Download image", variant="secondary", scale=1)
            delete_btn = gr.Button("Delete image", variant="stop", scale=1)

        with gr.Group(visible=False) as confirm_group:
            gr.Markdown(f"### {DELETE_CONFIRM_TITLE}\n\n{DELETE_CONFIRM_BODY}")
            with gr.Row():
                cancel_btn = gr.Button("Cancel", variant="secondary")
                continue_btn = gr.Button("Continue", variant="stop")

        # Generate chain: lock inputs, run the flow, unlock inputs
        file_input.upload(
            fn=begin_generation,
            inputs=[ui_state],
            outputs=[file_input, count_slider, status, ui_state],
            queue=False,
        ).then(
            fn=handle_upload,
            inputs=[file_input, count_slider, ui_state],
            outputs=[preview, gallery, status, ui_state],
            concurrency_limit=1,
        ).then(
            fn=end_generation,
            inputs=[ui_state],
            outputs=[file_input, count_slider, ui_state],
            queue=False,
        )

        gallery.select(
            fn=select_result,
            inputs=[ui_state],
            outputs=[selected_url, ui_state],
        )

        copy_btn.click(fn=copy_image_url, inputs=[selected_url], js=COPY_JS)
        download_btn.click(fn=download_image, inputs=[selected_url], js=DOWNLOAD_JS)

        delete_btn.click(
            fn=request_delete,
            inputs=[ui_state],
            outputs=[confirm_group, ui_state],
        )
        cancel_btn.click(
            fn=cancel_delete,
            inputs=[ui_state],
            outputs=[confirm_group, ui_state],
        )
        continue_btn.click(
            fn=confirm_delete,
            inputs=[ui_state],
            outputs=[gallery, confirm_group, selected_url, ui_state],
        )

    return app


def main():
    """Launch the standalone Gradio UI."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting Image Weaver UI...")
    logger.info(f"Provider: {config.default_provider} ({config.gemini_model})")

    app = create_ui()

    logger.info(f"Launching Gradio UI on {config.gradio_server_name}:{config.gradio_server_port}")

    app.queue().launch(
        server_name=config.gradio_server_name,
        server_port=config.gradio_server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
    )


if __name__ == "__main__":
    main()
