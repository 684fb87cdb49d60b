#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Консольный инструмент для шифра Цезаря.

Режимы:
  caesar-tool -e text.txt -k 3            шифрование
  caesar-tool -d encrypted_text.txt -k 3  расшифровка известным ключом
  caesar-tool -d encrypted_text.txt -bf   перебор ключей
  caesar-tool -d encrypted_text.txt -fq same_author.txt
                                          частотный анализ
  caesar-tool -i                          интерактивное меню
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt

from caesar import CipherError, ConfigError, Cryptographer

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# ПАРАМЕТРЫ ЗАПУСКА
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ToolOptions:
    """Параметры командной строки"""
    encode: str = ''
    decode: str = ''
    out: str = ''
    freq: str = ''
    key: int = 0
    brute: bool = False
    interactive: bool = False
    verbose: bool = False

    def validate(self) -> None:
        if self.interactive:
            return

        if self.encode and self.decode:
            raise ConfigError("выберите либо шифрование '-e', либо расшифровку '-d', но не оба режима")

        if not self.encode and not self.decode:
            raise ConfigError("не указан входной файл, используйте '-e <путь>' или '-d <путь>'")

        if self.decode:
            if self.brute and self.freq:
                raise ConfigError(
                    "выберите либо перебор '-bf', либо частотный анализ '-fq', но не оба режима")
            if not self.brute and not self.freq and self.key == 0:
                raise ConfigError(
                    "не указан ключ для расшифровки, используйте '-k <число>', "
                    "'-bf' или '-fq <путь>'")

        if self.encode and self.key == 0:
            raise ConfigError("не указан ключ для шифрования, используйте '-k <число>'")

    def input_path(self) -> Path:
        return Path(self.decode or self.encode)

    def output_path(self) -> Path:
        if self.out:
            return Path(self.out)
        prefix = 'decrypted_' if self.decode else 'encrypted_'
        return Path(prefix + self.input_path().name)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog='caesar-tool',
        description='Шифр Цезаря для русских текстов: шифрование, расшифровка и криптоанализ',
    )
    p.add_argument('-e', '--encode', default='', metavar='PATH', help='Зашифровать файл')
    p.add_argument('-d', '--decode', default='', metavar='PATH', help='Расшифровать файл')
    p.add_argument('-o', '--out', default='', metavar='PATH', help='Выходной файл')
    p.add_argument('-fq', '--freq', default='', metavar='PATH',
                   help='Частотный анализ (нужен открытый текст того же автора)')
    p.add_argument('-k', '--key', type=int, default=0, help='Ключ шифрования/расшифровки')
    p.add_argument('-bf', '--brute', action='store_true', help='Расшифровка перебором ключей')
    p.add_argument('-i', '--interactive', action='store_true', help='Интерактивный режим')
    p.add_argument('-v', '--verbose', action='store_true', help='Подробный вывод')
    return p


def parse_args(argv: Optional[Sequence[str]] = None) -> ToolOptions:
    ns = build_parser().parse_args(argv)
    return ToolOptions(
        encode=ns.encode, decode=ns.decode, out=ns.out, freq=ns.freq,
        key=ns.key, brute=ns.brute, interactive=ns.interactive, verbose=ns.verbose,
    )


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        datefmt='[%X]',
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# UI
# ═══════════════════════════════════════════════════════════════════════════════

class UI:
    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.c = console or Console()
        self.err = err_console or Console(stderr=True)

    def header(self):
        self.c.print(Panel(
            "[bold cyan]CAESAR TOOL[/bold cyan]\n"
            "[dim]Шифрование • Перебор • Частотный анализ[/dim]",
            border_style="cyan", box=box.DOUBLE
        ))

    def note(self, message: str):
        self.c.print(escape(message))

    def warn(self, message: str):
        self.c.print(f"[yellow]⚠️  {escape(message)}[/yellow]")

    def error(self, message: str):
        self.err.print(f"[bold red]❌ {escape(message)}[/bold red]")

    def processed(self, src: Path, dst: Path):
        self.c.print(f"[dim]Обработано: {escape(str(src))} >> {escape(str(dst))}[/dim]")

    def ask(self, prompt: str) -> str:
        return Prompt.ask(prompt, console=self.c).strip()

    def ask_key(self) -> int:
        return IntPrompt.ask("Введите ключ", console=self.c)


# ═══════════════════════════════════════════════════════════════════════════════
# ВЫПОЛНЕНИЕ
# ═══════════════════════════════════════════════════════════════════════════════

def _report_result(ui: UI, key: Optional[int]):
    if key is None:
        ui.warn("Ключ подобрать не удалось, расшифровка не выполнена")
    else:
        ui.note(f"Найден ключ: {key}")


def execute(opts: ToolOptions, ui: UI) -> None:
    """Запуск по параметрам командной строки"""
    src, dst = opts.input_path(), opts.output_path()

    # ключ 0 для перебора и анализа: ключ неизвестен
    analysis = bool(opts.decode) and opts.key == 0
    codec = Cryptographer(0 if analysis else opts.key)
    report = ui.note if opts.verbose else None

    with open(src, 'rb') as fin, open(dst, 'wb') as fout:
        if opts.encode:
            codec.encode(fin, fout)
        elif not analysis:
            codec.decode(fin, fout)
        elif opts.brute:
            _report_result(ui, codec.brute_force(fin, fout, report))
        else:
            with open(opts.freq, 'rb') as helper:
                _report_result(ui, codec.frequency_analysis(fin, helper, fout, report))

    log.info("Обработано: %s > %s", src, dst)
    ui.processed(src, dst)


# ═══════════════════════════════════════════════════════════════════════════════
# ИНТЕРАКТИВНОЕ МЕНЮ
# ═══════════════════════════════════════════════════════════════════════════════

MAIN_MODE = '0'
ENCRYPT_DECRYPT_MODE = '1'
CRYPTOANALYSIS_MODE = '2'
ENCRYPT_MODE = 'e'
DECRYPT_MODE = 'd'
BRUTE_FORCE_MODE = 'b'
FREQ_ANALYSIS_MODE = 'f'
EXIT_MODE = 'exit'

UNKNOWN_MSG = "Неизвестная команда. Возврат в главное меню"


def print_usage(ui: UI, mode: str):
    """Печатает меню для выбранного режима"""
    lines: List[str]
    if mode == MAIN_MODE:
        lines = [
            "(Главное меню)",
            f"Режим: ({ENCRYPT_DECRYPT_MODE}) Шифрование/Расшифровка "
            f"({CRYPTOANALYSIS_MODE}) Криптоанализ",
        ]
    elif mode == ENCRYPT_DECRYPT_MODE:
        lines = [
            "Шифрование/Расшифровка:",
            f"Режим: ({ENCRYPT_MODE}) Шифрование ({DECRYPT_MODE}) Расшифровка",
        ]
    elif mode == CRYPTOANALYSIS_MODE:
        lines = [
            "Криптоанализ:",
            f"Режим: ({BRUTE_FORCE_MODE}) Перебор ({FREQ_ANALYSIS_MODE}) Частотный анализ",
        ]
    else:
        ui.note(UNKNOWN_MSG)
        return

    ui.c.print()
    for line in lines:
        ui.c.print(f"\t{escape(line)}")
    ui.c.print(f"\tили '{EXIT_MODE}' для выхода")


def _scan_path(ui: UI, example: str) -> Path:
    return Path(ui.ask(f"Имя файла (например '{example}.txt')"))


def _handle_enc_dec(ui: UI, choice: str):
    if choice not in (ENCRYPT_MODE, DECRYPT_MODE):
        ui.note(UNKNOWN_MSG)
        return

    src = _scan_path(ui, 'input_text')
    ui.note("Теперь выходной файл")
    dst = _scan_path(ui, 'output_text')
    codec = Cryptographer(ui.ask_key())

    with open(src, 'rb') as fin, open(dst, 'wb') as fout:
        if choice == ENCRYPT_MODE:
            codec.encode(fin, fout)
        else:
            codec.decode(fin, fout)
    ui.processed(src, dst)


def _handle_cryptoanalysis(ui: UI, choice: str):
    if choice not in (BRUTE_FORCE_MODE, FREQ_ANALYSIS_MODE):
        ui.note(UNKNOWN_MSG)
        return

    src = _scan_path(ui, 'encrypted_text')
    ui.note("Теперь выходной файл")
    dst = _scan_path(ui, 'decrypted_text')

    helper_path = None
    if choice == FREQ_ANALYSIS_MODE:
        ui.note("Для анализа нужен файл-помощник:")
        ui.note("незашифрованный текст того же автора")
        helper_path = _scan_path(ui, 'same_author_text')

    # ключ неизвестен
    codec = Cryptographer(0)

    with open(src, 'rb') as fin, open(dst, 'wb') as fout:
        if helper_path is None:
            key = codec.brute_force(fin, fout, ui.note)
        else:
            with open(helper_path, 'rb') as helper:
                key = codec.frequency_analysis(fin, helper, fout, ui.note)
    _report_result(ui, key)
    ui.processed(src, dst)


def _handle_main(ui: UI, choice: str) -> bool:
    """Обрабатывает выбор в главном меню. False, если запрошен выход"""
    if choice == ENCRYPT_DECRYPT_MODE:
        print_usage(ui, ENCRYPT_DECRYPT_MODE)
        handler = _handle_enc_dec
    elif choice == CRYPTOANALYSIS_MODE:
        print_usage(ui, CRYPTOANALYSIS_MODE)
        handler = _handle_cryptoanalysis
    else:
        ui.note(UNKNOWN_MSG)
        return True

    sub = ui.ask("Выбор")
    if sub == EXIT_MODE:
        return False
    handler(ui, sub)
    return True


def interactive_loop(ui: UI) -> int:
    ui.header()
    while True:
        print_usage(ui, MAIN_MODE)
        try:
            choice = ui.ask("Выбор")
            if choice == EXIT_MODE:
                break
            if not _handle_main(ui, choice):
                break
        except EOFError:
            ui.error("ввод прерван: достигнут конец ввода")
            return 1
        except (CipherError, OSError) as e:
            ui.error(str(e))
            return 1

    ui.note("До свидания")
    return 0


# ═══════════════════════════════════════════════════════════════════════════════
# ТОЧКА ВХОДА
# ═══════════════════════════════════════════════════════════════════════════════

def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv:
        build_parser().print_help()
        return 1

    opts = parse_args(argv)
    setup_logging(opts.verbose)
    ui = UI()

    if opts.interactive:
        return interactive_loop(ui)

    try:
        opts.validate()
        execute(opts, ui)
    except (CipherError, OSError) as e:
        ui.error(str(e))
        return 1
    return 0


def run():
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n👋")
        sys.exit(130)


if __name__ == '__main__':
    run()
