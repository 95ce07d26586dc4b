"""Woffu勤怠エージェント - エントリーポイント"""
import argparse
import asyncio
import logging
import os
import signal
import sys
import time
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from dotenv import load_dotenv

from graph.graph import build_graph, initial_state
from schedulers.scheduler import (
    AttendanceScheduler,
    build_check_in_table,
    check_in_action_for,
    today_in,
)
from services.check_coordinator import CheckAction, CheckCoordinator, CheckKind
from services.config_loader import credentials_from_env, load_config, resolve_check_kind
from services.errors import AttendanceError
from services.notifiers import ConsoleNotifier, DiscordNotifier, Notifier, SlackNotifier
from services.woffu_calendar import WoffuCalendarService
from services.woffu_interface import WoffuInterface

logger = logging.getLogger("woffu_agent")

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

COMMANDS = {
    "check-in-home": CheckAction.CHECK_IN_HOME,
    "check-in-office": CheckAction.CHECK_IN_OFFICE,
    "checkout": CheckAction.CHECK_OUT,
}


@dataclass
class Services:
    client: WoffuInterface
    calendar_service: WoffuCalendarService
    coordinator: CheckCoordinator
    notifier: Notifier


def setup_logging(config: dict):
    level = str(config["logging"].get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_notifier(config: dict) -> Notifier:
    """Discord → Slack → コンソールの順で通知先を決める"""
    webhook_url = os.getenv("DISCORD_WEBHOOK_URL", "")
    if config["discord"]["enabled"] and webhook_url:
        return DiscordNotifier(webhook_url=webhook_url)

    slack_config = config["slack"]
    slack_token = os.getenv("SLACK_BOT_TOKEN", "")
    slack_channel = os.getenv("SLACK_NOTIFY_CHANNEL", slack_config.get("notify_channel", ""))
    if slack_config["enabled"] and slack_token:
        return SlackNotifier(token=slack_token, channel=slack_channel)

    return ConsoleNotifier()


def create_services(config: dict, dry_run: bool = False) -> Services:
    """設定に基づいてサービスインスタンスを生成"""
    client_type = "dummy" if dry_run else config["woffu"].get("client", "woffu")

    if client_type == "woffu":
        from services.woffu_client import WoffuClient
        cred = credentials_from_env()
        client = WoffuClient(
            company=cred.company,
            email=cred.email,
            password=cred.password,
            timeout=float(config["woffu"]["timeout_seconds"]),
        )
    else:
        from services.dummy_client import DummyWoffuClient
        client = DummyWoffuClient()

    return Services(
        client=client,
        calendar_service=WoffuCalendarService(client),
        coordinator=CheckCoordinator(client),
        notifier=create_notifier(config),
    )


async def run_check(services: Services, kind: CheckKind, today: Optional[date] = None) -> dict:
    """1回分の打刻処理（ログイン → 休日判定 → 打刻 → 通知）を実行"""
    graph = build_graph(
        client=services.client,
        calendar_service=services.calendar_service,
        coordinator=services.coordinator,
        notifier=services.notifier,
    )
    return await graph.ainvoke(initial_state(kind, today))


def run_kind(services: Services, kind: CheckKind, today: Optional[date] = None) -> int:
    try:
        result = asyncio.run(run_check(services, kind, today))
    except AttendanceError as e:
        logger.error("%s の実行に失敗しました: %s", kind.action.value, e)
        services.notifier.send_error(str(e))
        return 1

    logger.info("%s: %s", kind.action.value, result["action_taken"])
    return 0


def run_once(services: Services, config: dict, action: CheckAction) -> int:
    try:
        kind = resolve_check_kind(action, config)
    except AttendanceError as e:
        logger.error("%s の実行に失敗しました: %s", action.value, e)
        services.notifier.send_error(str(e))
        return 1
    return run_kind(services, kind)


def resolve_scheduled_kinds(config: dict, table: dict[int, CheckAction]) -> dict[CheckAction, CheckKind]:
    """スケジュールで使う全打刻種別を起動前に解決する（設定不足はここで失敗）"""
    actions = sorted({*table.values(), CheckAction.CHECK_OUT}, key=lambda a: a.value)
    return {action: resolve_check_kind(action, config) for action in actions}


def scheduled_check_in(
    services: Services,
    kinds: dict[CheckAction, CheckKind],
    table: dict[int, CheckAction],
    timezone: Optional[str] = None,
    now: Optional[datetime] = None,
) -> int:
    """スケジューラのタイムゾーンでの曜日から出勤種別を決めて打刻"""
    today = today_in(timezone, now)
    action = check_in_action_for(today.weekday(), table)
    return run_kind(services, kinds[action], today)


def run_scheduler(services: Services, config: dict) -> int:
    sched_config = config["scheduler"]
    timezone = sched_config.get("timezone")
    table = build_check_in_table(sched_config.get("check_in_locations"))
    kinds = resolve_scheduled_kinds(config, table)

    def check_in_job():
        scheduled_check_in(services, kinds, table, timezone)

    def check_out_job():
        run_kind(services, kinds[CheckAction.CHECK_OUT], today_in(timezone))

    scheduler = AttendanceScheduler(
        check_in_cron=sched_config["check_in_cron"],
        check_out_cron=sched_config["check_out_cron"],
        check_in_job=check_in_job,
        check_out_job=check_out_job,
        timezone=timezone,
    )
    scheduler.start()
    logger.info(
        "スケジュール実行を開始します（出勤: %s / 退勤: %s）",
        sched_config["check_in_cron"],
        sched_config["check_out_cron"],
    )

    # シグナルハンドリング
    def shutdown(signum, frame):
        logger.info("停止中...")
        scheduler.stop()
        logger.info("停止しました")
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    logger.info("Ctrl+Cで停止します")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        shutdown(None, None)
    return 0


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Woffu自動打刻エージェント")
    parser.add_argument(
        "command",
        choices=[*COMMANDS, "schedule"],
        help="check-in-home: 在宅出勤, check-in-office: 出社出勤, checkout: 退勤, schedule: 定期実行",
    )
    parser.add_argument("--config", "-c", default="config.yaml", help="設定ファイルのパス")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Woffuに接続せずダミークライアントで実行",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """メイン起動処理"""
    args = parse_args(argv)
    load_dotenv()

    try:
        config = load_config(args.config)
    except AttendanceError as e:
        print(f"[勤怠エージェント] {e}", file=sys.stderr)
        return 1
    setup_logging(config)

    try:
        services = create_services(config, dry_run=args.dry_run)
    except AttendanceError as e:
        logger.error("起動に失敗しました: %s", e)
        return 1

    if args.command == "schedule":
        try:
            return run_scheduler(services, config)
        except AttendanceError as e:
            logger.error("スケジューラを開始できません: %s", e)
            return 1
    return run_once(services, config, COMMANDS[args.command])


if __name__ == "__main__":
    sys.exit(main())
