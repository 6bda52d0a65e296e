import threading

from vcreviews.shared.locks import KeyedLock


class TestKeyedLock:
    def test_same_key_is_exclusive(self):
        locks = KeyedLock()
        inside = []
        overlap = []

        def worker():
            with locks.hold("member-1"):
                inside.append(1)
                if len(inside) > 1:
                    overlap.append(True)
                threading.Event().wait(0.01)
                inside.pop()

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert overlap == []

    def test_different_keys_do_not_block(self):
        locks = KeyedLock()
        with locks.hold("member-1"):
            acquired = threading.Event()

            def other():
                with locks.hold("member-2"):
                    acquired.set()

            thread = threading.Thread(target=other)
            thread.start()
            assert acquired.wait(timeout=1)
            thread.join()

    def test_registry_is_emptied_after_release(self):
        locks = KeyedLock()
        with locks.hold("member-1"):
            assert len(locks) == 1
        assert len(locks) == 0

    def test_lock_released_on_error(self):
        locks = KeyedLock()
        try:
            with locks.hold("member-1"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        with locks.hold("member-1"):
            assert len(locks) == 1
