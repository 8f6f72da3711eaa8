from __future__ import annotations
import argparse
import asyncio
import signal
from . import __version__
from .config import load_settings, PROFILES, Settings
from .core.orchestrator import build_engine
from .core.intent import parse_intent
from .core.planner import plan_steps, PLATFORMS
from .core.sink import EventSink
from .core.types import LogEvent, RunStatus
from .tools.logs import log_event

EXIT_CODES = {RunStatus.COMPLETED: 0, RunStatus.FAILED: 1, RunStatus.STOPPED: 130}

# === Affichage ================================================================
def _print_banner(phase_label: str):
    print(f"WebAgent v{__version__} — {phase_label}")

def _print_settings(prompt: str | None, platform: str, s: Settings):
    print(f"prompt   = {repr(prompt) if prompt is not None else 'None'}")
    print(f"platform = {platform}")
    print(f"profile  = {s.general.profile}")
    p = s.pacing
    print(
        "pacing   = {event=%sms, parse=%sms, plan=%sms, step=%sms}"
        % (p.event_pacing_ms, p.parse_delay_ms, p.plan_delay_ms, p.step_delay_ms)
    )
    print(f"honor_waits = {s.executor.honor_waits}")

def _print_event(event: LogEvent) -> None:
    print(f"[{event.time_label}] {event.kind.value:<7} {event.message}", flush=True)

# === Arguments ================================================================
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser("webagent", description="WebAgent — commande en langage naturel -> actions d'interface")
    ap.add_argument("--prompt", help="Commande en texte libre (ex: 'Send a message to John ...').")
    ap.add_argument("--platform", default=None, help="Application cible (%s)." % "|".join(PLATFORMS))
    ap.add_argument("--config", default="config", help="Chemin vers le dossier de configuration.")
    ap.add_argument("--profile", choices=PROFILES, default="instant", help="Profil de rythme d'exécution.")
    ap.add_argument("--plan-only", action="store_true", help="Afficher l'intention et le plan sans exécuter.")
    ap.add_argument("--version", action="store_true", help="Afficher la version et quitter.")
    return ap

# === Exécution ================================================================
async def _execute(s: Settings, prompt: str, platform: str) -> RunStatus:
    def _action_log(msg: str) -> None:
        print(f"  > {msg}", flush=True)
        log_event(s, msg, kind="action")

    engine = build_engine(s, platform=platform, on_log=_action_log)

    def _journal(event: LogEvent) -> None:
        _print_event(event)
        log_event(s, event.message, kind=event.kind.value)

    sink = EventSink(on_event=_journal)
    stream = engine.start(prompt, platform)

    # Ctrl+C -> arrêt coopératif à la prochaine frontière d'étape
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, engine.stop)
    except (NotImplementedError, RuntimeError):  # pragma: no cover - Windows
        pass

    state = await sink.drain(stream)
    await engine.wait()
    return state.status

# === Main ====================================================================
def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    s = load_settings(config=args.config, profile=args.profile)
    platform = (args.platform or s.general.default_platform).lower()

    _print_banner("config loaded")
    _print_settings(args.prompt, platform, s)

    if not args.prompt or not args.prompt.strip():
        print("ERR: --prompt requis (texte non vide).")
        return 2

    intent = parse_intent(args.prompt, platform)
    plan = plan_steps(intent)
    print(f"\n=== INTENT: {intent.action} ===")
    print(intent)
    print("\n=== PLAN ===")
    for i, step in enumerate(plan, 1):
        print(f"{i}. [{step.kind}] {step.description}")
    if not plan:
        print("(aucune étape)")

    if args.plan_only:
        return 0

    print("\n=== RUN ===")
    status = asyncio.run(_execute(s, args.prompt, platform))
    print(f"\nSTATUS: {status.value}")
    return EXIT_CODES.get(status, 1)

if __name__ == "__main__":
    raise SystemExit(main())
