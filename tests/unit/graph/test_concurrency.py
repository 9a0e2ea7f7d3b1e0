"""
Concurrency tests for the repository.

Mutations are serialized by the repository's write lock; these tests make
sure no update is lost and no id is handed out twice under contention.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from hypergraphql.graph.repository import Repository
from hypergraphql.graph.types import RecordKind


class TestConcurrentWrites:

    def test_parallel_creates_get_unique_ids(self):
        repository = Repository()

        def create_many(_):
            return [repository.create(RecordKind.ENTITY, "X").id for _ in range(50)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            batches = list(pool.map(create_many, range(8)))

        ids = [record_id for batch in batches for record_id in batch]
        assert len(set(ids)) == 400
        assert repository.count(RecordKind.ENTITY) == 400

    def test_updates_to_distinct_keys_are_not_lost(self):
        repository = Repository()
        entity = repository.create(RecordKind.ENTITY, "Counter")
        barrier = threading.Barrier(10)

        def write(index):
            barrier.wait()
            repository.update(RecordKind.ENTITY, entity.id, {f"k{index}": index})

        threads = [threading.Thread(target=write, args=(i,)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        attributes = repository.get(RecordKind.ENTITY, entity.id).attributes
        assert attributes == {f"k{i}": i for i in range(10)}

    def test_readers_see_whole_records(self):
        repository = Repository()
        entity = repository.create(RecordKind.ENTITY, "Pair", {"a": 0, "b": 0})
        stop = threading.Event()
        torn = []

        def writer():
            for i in range(1, 500):
                repository.update(RecordKind.ENTITY, entity.id, {"a": i, "b": i})
            stop.set()

        def reader():
            while not stop.is_set():
                current = repository.get(RecordKind.ENTITY, entity.id)
                if current.attributes["a"] != current.attributes["b"]:
                    torn.append(current.attributes)

        threads = [threading.Thread(target=writer)] + [
            threading.Thread(target=reader) for _ in range(3)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert torn == []
