import functools

import gradio as gr

from flat_earth_renders import constants
from flat_earth_renders.geo import GeoPoint
from flat_earth_renders.rendering import FrameState, MapRenderer, advance_frame
from flat_earth_renders.viewport import DiskViewport

# Custom CSS to prevent the 'white flash' by hiding the Gradio loading spinner
# and keeping the old image visible.
CSS = """
.gradio-container { background-color: #0b0f19 !important; color: #e5e7eb !important; }
#output_img { background-color: #0b0f19 !important; border-radius: 8px; overflow: hidden; border: none !important; }
#output_img img { object-fit: contain; }

/* Keep the image fully opaque and sharp while generating */
.generating, .pending {
    opacity: 1 !important;
    filter: none !important;
    transition: none !important;
}

/* Hide ALL Gradio loading indicators, spinners, and progress bars */
.loading, .progress-view, .loader, .spinner {
    display: none !important;
    visibility: hidden !important;
}
"""


def status_line(renderer, sun):
    lit = renderer.illumination.lit_fraction(sun, renderer.tile_x, renderer.tile_y)
    return (f"**Sun overhead at** {sun.lat:.2f}° lat, {sun.lon:.2f}° lon (positive west)"
            f" · **Lit share of map:** {lit * 100:.1f}%")


def move_sun(lat, lon, follow, evt, viewport):
    """
    Handle a click on the map image.

    Clicking the image is the pointer; the checkbox is the "update requested"
    signal. A click outside the disk leaves the sun where it was.

    Args:
        lat, lon: Current sun position from the sliders
        follow: "Move sun on click" checkbox
        evt: Select event; `evt.index` is the clicked (x, y) pixel
        viewport: DiskViewport of the rendered image

    Returns:
        tuple: New (lat, lon) for the sliders
    """
    state = FrameState(sun=GeoPoint(lat, lon))
    new_state = advance_frame(state, evt.index, follow, viewport)
    if not new_state.sun.is_on_map:
        return lat, lon
    return new_state.sun.lat, new_state.sun.lon


def create_ui(map_path=None, size_px=None, step=None):

    size = size_px if size_px is not None else constants.DEFAULT_IMAGE_SIZE_PX
    default_step = step if step is not None else constants.DEFAULT_TILE_STEP_PX
    viewport = DiskViewport.for_size(size)

    # One renderer per tile step; each keeps its own frame cache
    @functools.lru_cache(maxsize=8)
    def get_renderer(step):
        return MapRenderer(size_px=size, map_path=map_path, step=step)

    # Load the map now so a bad asset fails before the server starts
    get_renderer(default_step)

    def render_frame(lat, lon, step):
        renderer = get_renderer(int(step))
        sun = GeoPoint(lat, lon)
        return renderer.render_image(sun=sun), status_line(renderer, sun)

    def on_select(lat, lon, follow, evt: gr.SelectData):
        return move_sun(lat, lon, follow, evt, viewport)

    with gr.Blocks(title="Flat Earth Renderer") as demo:

        gr.Markdown("# Flat Earth Renderer: Day & Night")
        gr.Markdown("Azimuthal world map with the sub-solar point and its day/night boundary.")

        with gr.Row():
            with gr.Column(scale=1):
                with gr.Group():
                    gr.Markdown("### ☀️ Sun Position")
                    lat_slider = gr.Slider(minimum=-90, maximum=90, value=constants.DEFAULT_SUN_LAT, step=0.01,
                                           label="Sun Latitude", info="90 = north pole (disk center)")
                    lon_slider = gr.Slider(minimum=-180, maximum=180, value=constants.DEFAULT_SUN_LON, step=0.01,
                                           label="Sun Longitude", info="Positive WEST of Greenwich")
                    follow_toggle = gr.Checkbox(value=True, label="Move sun on click",
                                                info="Click the map to put the sun overhead there")

                with gr.Group():
                    gr.Markdown("### 🧮 Quality")
                    step_slider = gr.Slider(minimum=1, maximum=max(16, default_step), value=default_step, step=1,
                                            label="Tile Size (px)", info="Larger tiles render faster")
                    reset_btn = gr.Button("🔄 Reset Sun", variant="secondary")

                status = gr.Markdown()

            with gr.Column(scale=2):
                output_img = gr.Image(label="Flat Earth", interactive=False, elem_id="output_img")

        inputs = [lat_slider, lon_slider, step_slider]
        outputs = [output_img, status]

        def reset_view():
            return [constants.DEFAULT_SUN_LAT, constants.DEFAULT_SUN_LON, default_step]

        reset_btn.click(fn=reset_view, outputs=inputs)

        output_img.select(fn=on_select, inputs=[lat_slider, lon_slider, follow_toggle],
                          outputs=[lat_slider, lon_slider])

        # Auto-render on any change
        for input_comp in inputs:
            input_comp.change(fn=render_frame, inputs=inputs, outputs=outputs,
                              trigger_mode="always_last", show_progress="hidden")

        # Initial render
        demo.load(fn=render_frame, inputs=inputs, outputs=outputs, show_progress="hidden")

    return demo


if __name__ == "__main__":
    demo = create_ui()
    demo.launch(css=CSS)
