"""
CHIP-8 emulator front end: pygame window, or a headless run that prints the screen
"""

import argparse
import sys
import time

import pygame

from chipjax import Chip8, Chip8Error, StepResult, create_color_scheme, display_to_text, save_frame
from chipjax.logging import get_logger
from chipjax.rendering import chip8_display_to_rgb

# Conventional layout: 1234/QWER/ASDF/ZXCV -> 123C/456D/789E/A0BF
KEY_LAYOUT = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a CHIP-8 ROM.")
    parser.add_argument("rom", help="path to the ROM file")
    parser.add_argument("--scale", type=int, default=10, help="window pixels per CHIP-8 pixel")
    parser.add_argument("--ipf", type=int, default=10, help="instructions per frame (10 x 60 FPS = 600 Hz)")
    parser.add_argument("--fps", type=int, default=60, help="frames per second")
    parser.add_argument("--color-scheme", default="classic", help="rendering color scheme")
    parser.add_argument("--headless", action="store_true", help="run without a window and print the screen")
    parser.add_argument("--cycles", type=int, default=1000, help="cycles to execute in headless mode")
    parser.add_argument("--screenshot", help="save the final screen to this image file (headless mode)")
    parser.add_argument("--log-level", default="INFO", help="DEBUG traces every instruction")
    return parser.parse_args(argv)


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    if not text_lines:
        return

    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay_height = len(text_lines) * line_height + 8
    overlay_width = max_width + 16

    overlay = pygame.Surface((overlay_width, overlay_height))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def run_headless(machine, args):
    machine.run(args.cycles, progress=True)
    print(display_to_text(machine.state.display))
    if args.screenshot:
        save_frame(machine.state.display, args.screenshot, scale=args.scale, color_scheme=args.color_scheme)
        get_logger().info(f"Saved screenshot to {args.screenshot}")


def run_emulator(machine, args):
    """Main emulator loop: F1=Pause, F2=Reset, F3=Debug, -/= speed, ESC=Quit"""
    rom_filename = args.rom
    scale = args.scale
    ipf = args.ipf
    on_color, off_color = create_color_scheme(args.color_scheme)
    key_map = {pygame.key.key_code(name): index for name, index in KEY_LAYOUT.items()}

    pygame.init()
    screen = pygame.display.set_mode((64 * scale, 32 * scale))
    pygame.display.set_caption("CHIP-8")
    clock = pygame.time.Clock()

    running = True
    paused = False
    show_debug = False
    waiting = False
    frame = None
    start_time = time.time()

    while running:
        clock.tick(args.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_F1:
                    paused = not paused
                elif event.key == pygame.K_F2:
                    machine.reset()
                    machine.load_rom(rom_filename)
                    paused = False
                elif event.key == pygame.K_F3:
                    show_debug = not show_debug
                elif event.key == pygame.K_EQUALS:
                    ipf = min(100, ipf + 2)
                elif event.key == pygame.K_MINUS:
                    ipf = max(1, ipf - 2)
                elif event.key in key_map:
                    machine.set_key(key_map[event.key], True)
            elif event.type == pygame.KEYUP:
                if event.key in key_map:
                    machine.set_key(key_map[event.key], False)

        if not paused and machine.fault is None:
            for _ in range(ipf):
                try:
                    result = machine.step()
                except Chip8Error:
                    break
                waiting = result is StepResult.WAITING_FOR_KEY
                if waiting:
                    break

        if machine.redraw or frame is None:
            pixels = machine.consume_frame()
            rgb = chip8_display_to_rgb(pixels.T, scale, on_color, off_color)
            frame = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))

        screen.blit(frame, (0, 0))

        if show_debug:
            font_small = pygame.font.Font(None, 18)
            runtime = time.time() - start_time
            ips = machine.cycles / runtime if runtime > 0 else 0
            state = machine.state
            if machine.fault is not None:
                status = "HALTED"
            elif paused:
                status = "PAUSED"
            elif waiting:
                status = "WAITING FOR KEY"
            else:
                status = "RUNNING"

            debug_lines = [
                f"PC: 0x{int(state.pc):03X}  I: 0x{int(state.I):03X}",
                f"Cycles: {machine.cycles}",
                f"CPU: {ips:.0f} Hz  IPF: {ipf}",
                f"DT: {int(state.delay_timer)}  ST: {int(state.sound_timer)}{'  SOUND' if machine.sound_active else ''}",
                f"Status: {status}",
            ]
            debug_lines.append(" ".join(f"{int(v):02X}" for v in state.V))
            draw_overlay_text(screen, debug_lines, (5, 5), font_small, alpha=100)

        pygame.display.flip()

    pygame.quit()


def main(argv=None):
    args = parse_args(argv)
    logger = get_logger()
    logger.set_level(args.log_level)

    machine = Chip8(logger=logger)
    try:
        machine.load_rom(args.rom)
    except (OSError, Chip8Error) as e:
        logger.error(f"Could not load {args.rom}: {e}")
        return 1

    if args.headless:
        try:
            run_headless(machine, args)
        except Chip8Error:
            return 1
    else:
        run_emulator(machine, args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
