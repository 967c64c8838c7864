# signspeak/live_demo.py
"""
Live webcam recognition from the terminal.

    python -m signspeak.live_demo                 # MediaPipe landmarks + gestures
    python -m signspeak.live_demo --mode motion   # pixel skin/motion gate only
    python -m signspeak.live_demo --text "Hello"  # text -> sign letter, no camera
"""
import argparse
import os
import sys

from signspeak.camera import CameraError, CameraStream
from signspeak.recognizer import (TranslationHistory, confidence_level,
                                  pixel_detector_from_config, recognizer_from_config)
from signspeak.text_to_sign import fingerspell, text_to_sign
from signspeak.utils import Logger, load_config, resolve


def _print_speaker(text: str):
    print(f"[TTS] {text}")


def build_pipeline(cfg, mode: str, model_path=None, on_detection=None):
    if mode in ("motion", "skin"):
        return pixel_detector_from_config(cfg, mode, on_detection=on_detection)

    from signspeak.gestures import GesturePredictor
    from signspeak.model import LandmarkPredictor, LetterModel, load_predictor
    from signspeak.tracker import HandTracker

    r = cfg["recognition"]
    if model_path and os.path.exists(resolve(model_path)):
        predictor = LandmarkPredictor(LetterModel.load(resolve(model_path)))
    elif model_path:
        print(f"[MODEL] {resolve(model_path)} not found; using gesture matching")
        predictor = LandmarkPredictor()
    else:
        predictor = load_predictor(cfg)
    if not predictor.has_model:
        predictor = GesturePredictor(min_score=float(r["gesture_min_score"]),
                                     frame_size=(int(r["frame_width"]), int(r["frame_height"])))
    tracker = HandTracker.from_config(cfg)
    return recognizer_from_config(cfg, tracker, predictor, on_detection=on_detection)


def run_text(text: str) -> int:
    sign = text_to_sign(text)
    if sign is None:
        print("[TXT] Nothing to translate")
        return 1
    print(f'[TXT] Sign for "{sign.letter}"  <- {sign.text!r}')
    print(f"[TXT] Fingerspelling: {' '.join(fingerspell(text))}")
    return 0


def run_live(cfg, mode: str, model_path=None, speech=True, max_frames=None) -> int:
    logger = Logger(cfg["paths"]["log_file"])
    history = TranslationHistory.from_config(cfg, speak=_print_speaker)
    history.speech_enabled = speech

    def on_detection(letter, confidence):
        entry = history.add(letter, confidence)
        if entry is not None:
            print(f"[DET] {letter} ({confidence:.2f}, {confidence_level(confidence)})  "
                  f"recent: {history.recent_text()}")

    pipeline = build_pipeline(cfg, mode, model_path, on_detection=on_detection)
    logger.log(f"Session start (mode={mode})")
    frames = 0
    try:
        with CameraStream.from_config(cfg) as cam:
            for frame in cam.frames():
                pipeline.process_frame(frame)
                frames += 1
                if max_frames is not None and frames >= max_frames:
                    break
    except CameraError as e:
        logger.log(f"[CAM][FATAL] {e}")
        return 2
    except KeyboardInterrupt:
        print("\n[SYS] Interrupted by user")
    finally:
        close = getattr(getattr(pipeline, "tracker", None), "close", None)
        if close is not None:
            close()

    logger.log(f"Session end: {frames} frames, {len(history)} letters, text={history.recent_text()!r}")
    return 0


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="SignSpeak live ASL letter recognition")
    ap.add_argument("--mode", choices=["landmarks", "motion", "skin"], default="landmarks")
    ap.add_argument("--camera", type=int, default=None, help="camera index (overrides config)")
    ap.add_argument("--config", default=None, help="path to config.yaml")
    ap.add_argument("--model", default=None, help="landmark model (.keras/.h5/.joblib)")
    ap.add_argument("--max-frames", type=int, default=None)
    ap.add_argument("--no-speech", action="store_true", help="do not speak detected letters")
    ap.add_argument("--text", default=None, help="translate text to a sign letter and exit")
    args = ap.parse_args(argv)

    if args.text is not None:
        return run_text(args.text)

    cfg = load_config(args.config)
    if args.camera is not None:
        cfg["camera"]["index"] = args.camera
    return run_live(cfg, args.mode, model_path=args.model,
                    speech=not args.no_speech, max_frames=args.max_frames)


if __name__ == "__main__":
    sys.exit(main())
