#!/usr/bin/env python
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from rankconsole.application import BoardWorkflow, UploadOrchestrator
from rankconsole.core.errors import ConsoleError
from rankconsole.core.log import set_level
from rankconsole.core.settings import Settings, load_settings
from rankconsole.infrastructure import RankingAPIClient


async def run(path: Path, settings: Settings, force: bool, check_only: bool) -> int:
    client = RankingAPIClient(settings.api_base, timeout=settings.api_timeout)
    orchestrator = UploadOrchestrator(service_factory=lambda: client)
    try:
        try:
            identity = await orchestrator.upload(path.name, path.read_bytes())
        except ConsoleError as exc:
            print(f"上传失败: {orchestrator.upload_state.error_message or exc}")
            return 1
        print(f"已上传: {identity.to_dict()}")

        workflow = orchestrator.session.workflow
        if isinstance(workflow, BoardWorkflow):
            workflow.check()
            await orchestrator.wait_idle()
            if workflow.state.check.error_message:
                print(f"检查失败: {workflow.state.check.error_message}")
                return 1
            print("检查通过")
            if check_only:
                return 0

            task = workflow.update(force)
            last = ""
            while not task.done():
                progress = workflow.state.update.progress_text
                if progress and progress != last:
                    print(f"  {progress}")
                    last = progress
                await asyncio.sleep(0.1)
            if workflow.state.update.error_message:
                print(f"更新失败: {workflow.state.update.error_message}")
                return 1
            print("更新完成")
        else:
            await orchestrator.wait_idle()
            if workflow.state.process.error_message:
                print(f"处理失败: {workflow.state.process.error_message}")
                return 1
            print("处理完成")
        return 0
    finally:
        await client.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description="上传排名文件或数据文件并执行对应流程")
    parser.add_argument("path", help="待上传文件，如 vocaloid-weekly-main-87.csv 或 2024-05-01.json")
    parser.add_argument("--api-base", default=None, help="排名后端地址，默认读取 RANKING_API_BASE")
    parser.add_argument("--force", action="store_true", help="强制更新排名")
    parser.add_argument("--check-only", action="store_true", help="只执行检查，不更新")
    args = parser.parse_args()

    settings = load_settings()
    set_level(settings.log_level)
    if args.api_base:
        settings.api_base = args.api_base.rstrip("/")
    sys.exit(asyncio.run(run(Path(args.path), settings, args.force, args.check_only)))


if __name__ == "__main__":
    main()
