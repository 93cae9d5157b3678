"""Console UI for chytanka application."""

import asyncio
import os
import tempfile
import threading

from core.errors import CaptureError
from core.game import GameController
from core.models import GameState, Verdict


class ConsoleUI:
    """Console user interface driving a GameController."""

    def __init__(self, controller: GameController, image_dir: str = None):
        self.controller = controller
        self.image_dir = image_dir or os.path.join(tempfile.gettempdir(), 'chytanka')

    async def ask(self, prompt: str) -> str:
        """Read a line without blocking the event loop (background fetches keep running).

        The read happens on a daemon thread, so an interrupted game can exit
        while input() is still waiting for a line.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def deliver(answer, error):
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(answer)

        def read():
            answer, error = None, None
            try:
                answer = input(prompt)
            except EOFError as e:
                error = e
            try:
                loop.call_soon_threadsafe(deliver, answer, error)
            except RuntimeError:
                # Loop already closed, nobody is waiting for this line
                pass

        threading.Thread(target=read, name='chytanka-input', daemon=True).start()
        answer = await future
        return answer.strip().lower()

    def print_word(self):
        """Print the word, one syllable group per line, with the attempts left."""
        c = self.controller
        stars = '★' * c.attempts_left + '☆' * (c.max_attempts - c.attempts_left)
        print('\n' + '=' * 40)
        print(f'  {stars}')
        print()
        for group in c.challenge.display_form:
            print(f'    {group}')
        print('=' * 40)

    def print_status(self):
        c = self.controller
        if c.state is GameState.READY and c.attempt_count > 0:
            print('Спробуй ще раз!')
        if c.attempt_count >= c.hint_after:
            if c.can_play_word:
                print('Підказка: введи "listen", щоб послухати слово.')
            elif c.media_loading:
                print('Завантажую...')

    def save_illustration(self, image) -> str:
        """Write the illustration to disk and return its path."""
        os.makedirs(self.image_dir, exist_ok=True)
        path = os.path.join(self.image_dir, f'round_{self.controller.round_id}.{image.extension}')
        with open(path, 'wb') as f:
            f.write(image.data)
        return path

    def print_reveal(self):
        image = self.controller.visible_illustration
        if image is not None:
            print(f'Картинка: {self.save_illustration(image)}')
        else:
            print('Картинка завантажується...')

    async def play_round(self) -> bool:
        """Handle input for the current state. Returns False when the player quits."""
        c = self.controller

        if c.state is GameState.ERROR:
            print(f'\nНе вдалося отримати слово: {c.last_error}')
            answer = await self.ask('Enter - спробувати ще раз, "exit" - вийти: ')
            if answer == 'exit':
                return False
            print('Готую завдання...')
            await c.retry()
            return True

        if c.is_round_over:
            if c.state is GameState.SUCCESS:
                print('\nМолодець! Чудово! 🎉')
                self.print_reveal()
            else:
                print('\nСпробуємо інше слово...')
            answer = await self.ask('Enter - наступне слово, "exit" - вийти: ')
            if answer == 'exit':
                return False
            print('Готую завдання...')
            await c.advance()
            return True

        self.print_word()
        self.print_status()
        answer = await self.ask('Enter - читаю!, "listen" - послухати, "exit" - вийти: ')

        if answer == 'exit':
            return False
        if answer == 'listen':
            if not c.play_word():
                print('Слово ще не можна послухати.')
            return True
        if answer:
            return True

        try:
            c.start_recording()
        except CaptureError as e:
            print(f'Дозвольте доступ до мікрофону, щоб грати! ({e})')
            return True

        await self.ask('Говори... Enter - стоп: ')
        print('Слухаю...')
        try:
            verdict = await c.stop_recording()
        except CaptureError as e:
            print(f'Запис не вдався: {e}')
            return True
        if verdict is Verdict.UNAVAILABLE:
            print(f'Не вдалося перевірити вимову ({c.last_error}). Спробуй ще раз, спроба не зараховується.')
        return True

    async def run(self):
        """Run the main application loop."""
        print('Готую завдання...')
        await self.controller.start()
        try:
            while await self.play_round():
                pass
        except EOFError:
            pass
        finally:
            self.controller.shutdown()
        print('Бувай!')
