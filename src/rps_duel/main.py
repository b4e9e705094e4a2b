"""
剪刀石头布对战程序入口
Rock Paper Scissors Duel Main Entry
"""
import sys
import argparse
from typing import List, Optional
from .app import Application
from .utils.logger import setup_logger

logger = setup_logger("RPS.Main")


def build_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(description='剪刀石头布对战 (Rock Paper Scissors duel)')
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='配置文件路径（默认: config/config.yaml）'
    )
    parser.add_argument(
        '--mode',
        choices=['pvc', 'pvp'],
        default=None,
        help='对局模式: pvc 人机 / pvp 双人'
    )
    parser.add_argument(
        '--rounds',
        type=int,
        default=None,
        help='最大回合数'
    )
    parser.add_argument(
        '--difficulty',
        type=int,
        default=None,
        help='电脑难度 0-2（超出范围时截断）'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='电脑决策的随机种子'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    args = build_parser().parse_args(argv)
    
    logger.info("=" * 50)
    logger.info("剪刀石头布对战启动")
    logger.info("Rock Paper Scissors Duel Starting")
    logger.info("=" * 50)
    
    app = Application(
        config_path=args.config,
        overrides={
            'mode': args.mode,
            'max_rounds': args.rounds,
            'difficulty': args.difficulty,
            'seed': args.seed,
        }
    )
    
    try:
        if not app.start():
            logger.error("应用程序启动失败")
            return 1
    except KeyboardInterrupt:
        logger.info("用户中断程序")
    finally:
        logger.info("程序退出")
    
    return 0


if __name__ == "__main__":
    sys.exit(main())
