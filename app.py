# app.py
#   streamlit run app.py                      -> default Yes/No wheel
#   streamlit run app.py -- --wheel my.json   -> your own wheel
import argparse
import logging
import sys
import time

import streamlit as st

from spinwheel.config import WheelConfig, resolve_font
from spinwheel.engine import SpinEngine
from spinwheel.errors import SpinWheelError
from spinwheel.render import wheel_fig

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s",
)
logger = logging.getLogger("spinwheel.app")

st.set_page_config(page_title="Wheel Spin", page_icon="🎡", layout="centered")
st.title("🎡 Wheel Spin")

# =========================
# DISPLAY CONSTANTS
# =========================
WIDTH = 800
HEIGHT = 800
DEFAULT_FPS = 60
ASSETS_DIR = "assets"
# =========================


def parse_args(argv):
    parser = argparse.ArgumentParser(description="Simple GUI program to spin a wheel")
    parser.add_argument("-w", "--wheel", help="Path to the wheel you want to use.")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help="Frames drawn per second while spinning.")
    return parser.parse_args(argv)


args = parse_args(sys.argv[1:])

# ---- Load wheel ----
try:
    wheel = WheelConfig.load(args.wheel) if args.wheel else WheelConfig.default()
    font_path = resolve_font(wheel.font, ASSETS_DIR)
    engine = st.session_state.get("engine")
    if engine is None or st.session_state.get("wheel") != wheel:
        engine = SpinEngine(len(wheel.choices))
        st.session_state.result = None
except SpinWheelError as e:
    logger.error("Cannot start: %s", e)
    st.error(str(e))
    st.stop()

font_family = font_path.stem if font_path is not None else None

# ---- Session state ----
st.session_state.engine = engine
st.session_state.wheel = wheel
st.session_state.setdefault("result", None)
st.session_state.setdefault("spin_id", 0)
slot = st.empty()

# ---- UI ----
col1, col2 = st.columns([1, 1])
clicked = col1.button("🎲 Spin", use_container_width=True, disabled=engine.is_spinning)

if clicked and engine.request_spin():
    st.session_state.spin_id += 1
    st.session_state.result = None
    frame_time = 1.0 / max(args.fps, 1)
    selected = None
    frame = 0

    while engine.is_spinning:
        engine.update()
        index = engine.current_index()
        if index != selected:
            logger.debug("Pointer on %r", wheel.choices[index].name)
            selected = index

        frame_key = f"spin_{st.session_state.spin_id}_{frame}"
        slot.plotly_chart(wheel_fig(wheel, engine.angle, WIDTH, HEIGHT, font_family),
                          use_container_width=False, key=frame_key)
        frame += 1
        time.sleep(frame_time)

    st.session_state.result = engine.current_index()
    logger.info("Selected item: %s", wheel.choices[st.session_state.result])
    st.rerun()

# Idle wheel
slot.plotly_chart(wheel_fig(wheel, engine.angle, WIDTH, HEIGHT, font_family),
                  use_container_width=False, key="idle_wheel")

# Result display
if st.session_state.result is not None:
    choice = wheel.choices[st.session_state.result]
    col2.success(f"Result: **{choice.name}**")
    if choice.desc:
        st.info(choice.desc)
else:
    col2.caption("Press Spin to spin.")
