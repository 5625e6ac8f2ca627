"""
GPU workload catalog.

Each benchmark is described analytically by how much work and data one item
carries and how cache friendly its access stream is. Keys are namespaced by
category: "ml:", "sci:", "gfx:", "data:", "crypto:".

    required_ops = ops_per_item * total_items * computational_intensity
    total_bytes  = data_per_item_bytes * total_items
"""

import copy
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from chipsim.core.errors import require_fraction, require_non_negative


CATEGORY_NAMES: Dict[str, str] = {
    "ml": "Machine Learning",
    "sci": "Scientific Computing",
    "gfx": "Graphics",
    "data": "Data Analytics & Parallel Primitives",
    "crypto": "Cryptography & Other",
    "custom": "Custom",
}

CUSTOM_BENCHMARK_KEY = "custom"


@dataclass
class GpuBenchmarkInfo:
    """
    Analytic description of a GPU kernel.

    Attributes:
        name: Display name
        ops_per_item: Operations performed per work item
        data_per_item_bytes: Bytes moved per work item
        total_items: Number of work items
        locality_factor: Baseline L2 hit rate for strided access (0.0-1.0)
        category: Catalog category key ("ml", "sci", ...)
        intensity: Qualitative compute intensity
        access_description: Qualitative access pattern
        applications: Typical applications
    """
    name: str
    ops_per_item: float
    data_per_item_bytes: float
    total_items: float
    locality_factor: float
    category: str = CUSTOM_BENCHMARK_KEY
    intensity: str = ""
    access_description: str = ""
    applications: str = ""

    def __post_init__(self):
        self.validate()

    def validate(self):
        require_non_negative("ops_per_item", self.ops_per_item)
        require_non_negative("data_per_item_bytes", self.data_per_item_bytes)
        require_non_negative("total_items", self.total_items)
        require_fraction("locality_factor", self.locality_factor)

    def required_ops(self, computational_intensity: float = 1.0) -> float:
        return self.ops_per_item * self.total_items * computational_intensity

    @property
    def total_bytes(self) -> float:
        return self.data_per_item_bytes * self.total_items

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _bench(key, name, ops, data, items, locality, intensity, access, applications):
    return key, GpuBenchmarkInfo(
        name=name,
        ops_per_item=ops,
        data_per_item_bytes=data,
        total_items=items,
        locality_factor=locality,
        category=key.split(":", 1)[0],
        intensity=intensity,
        access_description=access,
        applications=applications,
    )


GPU_BENCHMARKS: Dict[str, GpuBenchmarkInfo] = dict([
    # =========================================================================
    # Machine Learning
    # =========================================================================
    _bench("ml:gemm_small", "ML: GEMM (Small)", 2 * 512, 4, 512 * 512, 0.95,
           "High", "Strided", "Neural Networks"),
    _bench("ml:gemm_large", "ML: GEMM (Large)", 2 * 4096, 4, 4096 * 4096, 0.9,
           "Very High", "Strided, potential cache capacity issues", "Large DL Models"),
    _bench("ml:sparse_gemm", "ML: Sparse GEMM", 2 * 1024, 12, 1024 * 1024, 0.3,
           "Medium", "Irregular, indirect memory access", "Recommender Systems, Graph NN"),
    _bench("ml:conv_small_kernel", "ML: Convolution (3x3)", 2 * 9, 4, 1024 * 1024, 0.98,
           "High", "High spatial locality", "CNNs, Image Processing"),
    _bench("ml:conv_large_kernel", "ML: Convolution (11x11)", 2 * 121, 4, 1024 * 1024, 0.9,
           "Very High", "High spatial locality, more cache pressure", "Early layers of CNNs"),
    _bench("ml:attention_mechanism", "ML: Attention (Simplified)", 2 * 256 * 256, 4, 256, 0.7,
           "Very High", "Mixed random and sequential", "Transformers, NLP"),
    _bench("ml:transformer_encoder", "ML: Transformer Encoder Layer", 12 * 512 * 512 * 2, 4, 1024, 0.75,
           "Very High", "Combination of dense GEMM and scattered attention", "BERT, GPT models"),
    _bench("ml:word2vec", "ML: Word2Vec (Skip-gram)", 300, 1200, 100_000, 0.2,
           "Medium", "Highly random access into embedding matrix", "Natural Language Processing"),
    _bench("ml:rnn_cell", "ML: RNN Cell", 2 * 512 * 512, 4, 1, 0.9,
           "High", "Sequential, dependent", "Sequence modeling"),
    _bench("ml:lstm_cell", "ML: LSTM Cell", 4 * (2 * 512 * 512), 4, 1, 0.85,
           "Very High", "Sequential, dependent gates", "Advanced sequence modeling"),
    _bench("ml:batch_norm", "ML: Batch Normalization", 5, 8, 1024 * 1024, 0.6,
           "Low", "Sequential", "Deep Learning"),
    _bench("ml:max_pooling", "ML: Max Pooling Layer", 4, 16, 1024 * 1024, 0.99,
           "Low", "Strided, high locality", "CNN feature extraction"),
    _bench("ml:activation_relu", "ML: Activation (ReLU)", 1, 8, 4096 * 4096, 0.9,
           "Very Low", "Purely sequential streaming", "Component in all neural networks"),

    # =========================================================================
    # Scientific Computing
    # =========================================================================
    _bench("sci:n_body_small", "Sci: N-Body (Small N)", 20 * 1024, 24, 1024, 0.9,
           "High", "All-to-all, benefits from shared memory", "Astrophysics, Molecular Dynamics"),
    _bench("sci:n_body_large", "Sci: N-Body (Large N)", 20 * 32768, 24, 32768, 0.5,
           "Very High", "All-to-all, memory bound", "Cosmological simulations"),
    _bench("sci:molecular_dynamics", "Sci: Molecular Dynamics", 50 * 512, 24, 32768, 0.8,
           "Very High", "Neighborhood-based, high locality with data structures",
           "Drug discovery, materials science"),
    _bench("sci:stencil_2d", "Sci: Stencil 2D", 5, 20, 4096 * 4096, 0.98,
           "Medium", "High spatial locality", "PDE solvers, Fluid Dynamics"),
    _bench("sci:stencil_3d", "Sci: Stencil 3D", 7, 28, 256 * 256 * 256, 0.95,
           "Medium", "High spatial locality in 3D", "Weather simulation, medical imaging"),
    _bench("sci:fluid_dynamics_lbm", "Sci: Fluid Dynamics (LBM)", 100, 36, 256 * 256 * 256, 0.9,
           "High", "Complex stencil (streaming and collision steps)", "CFD simulations"),
    _bench("sci:weather_model_kernel", "Sci: Weather Model Kernel", 250, 100, 512 * 512 * 128, 0.8,
           "High", "Complex 3D stencil and data access", "Weather forecasting"),
    _bench("sci:fft_1d", "Sci: 1D FFT", 5 * 20, 8, 1 << 20, 0.4,
           "Medium", "Strided, butterfly pattern", "Signal processing, image analysis"),
    _bench("sci:fft_2d", "Sci: 2D FFT", 10 * 10, 8, 2048 * 2048, 0.5,
           "Medium", "Complex strided access", "Image filtering"),
    _bench("sci:sparse_matrix_vector_mul", "Sci: Sparse Matrix-Vector Mul", 2, 12, 1_000_000, 0.2,
           "Low", "Irregular, indirect memory access", "Finite Element Method, solvers"),
    _bench("sci:monte_carlo_pi", "Sci: Monte Carlo (Pi)", 5, 0, 100_000_000, 1.0,
           "Low, but highly parallel", "None (compute bound)", "Financial modeling, physics"),
    _bench("sci:black_scholes", "Sci: Black-Scholes Option Pricing", 30, 20, 10_000_000, 0.95,
           "Medium", "Sequential streaming", "Financial engineering"),
    _bench("sci:quantum_circuit_sim", "Sci: Quantum Circuit Sim", 10 * 20, 16, 1 << 20, 0.6,
           "High", "Strided and complex, based on gates", "Quantum computing research"),

    # =========================================================================
    # Graphics
    # =========================================================================
    _bench("gfx:vertex_processing", "Gfx: Vertex Processing", 100, 48, 1_000_000, 0.8,
           "High", "Sequential stream", "3D Graphics Pipeline"),
    _bench("gfx:fragment_simple", "Gfx: Fragment Shading (Simple)", 20, 12, 1920 * 1080, 0.95,
           "Medium", "High spatial locality (2D tile)", "Real-time rendering"),
    _bench("gfx:fragment_complex", "Gfx: Fragment Shading (Complex)", 200, 64, 1920 * 1080, 0.7,
           "Very High", "High locality with some random access for textures", "AAA Games"),
    _bench("gfx:texture_sampling_heavy", "Gfx: Heavy Texture Sampling", 50, 200, 1920 * 1080, 0.6,
           "Medium", "High locality with trilinear/anisotropic filtering",
           "Advanced texturing in games"),
    _bench("gfx:ambient_occlusion", "Gfx: Ambient Occlusion (SSAO)", 64, 16, 1920 * 1080, 0.9,
           "High", "Random sampling in a local neighborhood", "Real-time graphics"),
    _bench("gfx:ray_tracing_simple", "Gfx: Ray Tracing (Simple)", 150, 100, 1920 * 1080, 0.85,
           "Very High", "Coherent random access", "Offline rendering, path tracing"),
    _bench("gfx:ray_tracing_bvh", "Gfx: Ray Tracing (BVH)", 80, 60, 1920 * 1080, 0.6,
           "High", "Incoherent random access", "Real-time ray tracing"),
    _bench("gfx:particle_simulation", "Gfx: Particle Simulation", 30, 24, 1_000_000, 0.5,
           "Medium", "Scattered reads, sequential writes", "VFX, physics engines"),
    _bench("gfx:geometry_shading", "Gfx: Geometry Shading", 300, 128, 500_000, 0.8,
           "High", "Stream amplification, unpredictable writes", "VFX, procedural generation"),
    _bench("gfx:tessellation", "Gfx: Tessellation", 50, 64, 200_000, 0.9,
           "Medium", "Localized, creates high-poly geometry", "Character models, terrain"),
    _bench("gfx:post_processing_bloom", "Gfx: Post-FX (Bloom)", 10, 8, 1920 * 1080, 0.98,
           "Low", "Image-space, separable blur filter", "HDR rendering"),
    _bench("gfx:compute_skinning", "Gfx: Compute Skinning", 80, 96, 100_000, 0.7,
           "Medium", "Strided reads (vertices), random reads (bone matrices)", "Character animation"),

    # =========================================================================
    # Data Analytics & Parallel Primitives
    # =========================================================================
    _bench("data:reduction_sum", "Data: Reduction (Sum)", 1, 4, 100_000_000, 0.4,
           "Low", "Sequential then strided", "Parallel primitive"),
    _bench("data:reduction_max", "Data: Reduction (Max)", 1, 4, 100_000_000, 0.4,
           "Low", "Sequential then strided", "Parallel primitive"),
    _bench("data:scan_blelloch", "Data: Scan (Prefix Sum)", 2, 8, 50_000_000, 0.5,
           "Low", "Strided, two-pass", "Parallel primitive"),
    _bench("data:histogram", "Data: Histogram", 2, 4, 100_000_000, 0.1,
           "Low", "Random access writes (atomic conflicts)", "Image processing, data analysis"),
    _bench("data:filter", "Data: Stream Compaction (Filter)", 1, 8, 50_000_000, 0.7,
           "Low", "Sequential reads, scattered writes", "Database queries"),
    _bench("data:radix_sort", "Data: Radix Sort", 20, 4, 20_000_000, 0.3,
           "Medium", "Highly random access patterns", "Sorting large datasets"),
    _bench("data:merge_sort", "Data: Merge Sort", 10, 8, 10_000_000, 0.6,
           "Medium", "Sequential blocks", "Sorting"),
    _bench("data:bitonic_sort", "Data: Bitonic Sort", 20, 8, 1 << 22, 0.3,
           "Medium", "Highly structured strided access, but not cache friendly",
           "Parallel sorting network"),
    _bench("data:database_join_hash", "Data: DB Hash Join", 10, 16, 10_000_000, 0.2,
           "Low", "Two-pass: random writes (build), sequential reads (probe)",
           "Database query processing"),
    _bench("data:graph_bfs", "Data: Graph Traversal (BFS)", 5, 12, 1_000_000, 0.1,
           "Low", "Highly irregular, follows graph structure", "Social network analysis, pathfinding"),
    _bench("data:graph_pagerank", "Data: Graph PageRank", 4, 8, 1_000_000, 0.1,
           "Low", "Sparse matrix-vector multiplication, irregular access",
           "Web search, network analysis"),
    _bench("data:string_search_aho", "Data: String Search (Aho-Corasick)", 5, 4, 100_000_000, 0.8,
           "Low", "Sequential text read, state-machine based pointer chasing",
           "Intrusion detection, bioinformatics"),
    _bench("data:k_means_clustering", "Data: K-Means Clustering", 3 * 64, 4 * 64, 100_000, 0.7,
           "Medium", "Iterative, reads all points and centroids repeatedly", "Unsupervised learning"),

    # =========================================================================
    # Cryptography & Other
    # =========================================================================
    _bench("crypto:sha256", "Crypto: SHA-256 Hash", 64 * 8, 64, 100_000, 0.99,
           "High", "Highly sequential within a block", "Blockchain, security"),
    _bench("crypto:aes_encrypt", "Crypto: AES Encryption", 10 * 16 * 4, 16, 1_000_000, 0.8,
           "High", "Table lookups and permutations", "Data encryption"),
    _bench(CUSTOM_BENCHMARK_KEY, "Custom Benchmark", 100, 50, 1_000_000, 0.5,
           "User-defined", "User-defined", "Custom workload modeling"),
])


def get_gpu_benchmark(key: str) -> Optional[GpuBenchmarkInfo]:
    """Get a copy of a GPU benchmark by key (e.g. 'ml:gemm_small')."""
    bench = GPU_BENCHMARKS.get(key)
    return copy.deepcopy(bench) if bench is not None else None


def list_gpu_benchmarks(category: Optional[str] = None) -> List[str]:
    """
    List benchmark keys.

    Args:
        category: Optional category key to filter by ("ml", "sci", ...)
    """
    if category is None:
        return list(GPU_BENCHMARKS.keys())
    return [k for k, b in GPU_BENCHMARKS.items() if b.category == category]


def benchmarks_by_category() -> Dict[str, List[str]]:
    """Benchmark keys grouped by category, in catalog order."""
    grouped: Dict[str, List[str]] = {}
    for key, bench in GPU_BENCHMARKS.items():
        grouped.setdefault(bench.category, []).append(key)
    return grouped


def custom_benchmark(
    ops_per_item: float = 100,
    data_per_item_bytes: float = 50,
    total_items: float = 1_000_000,
    locality_factor: float = 0.5,
    name: str = "Custom Benchmark",
) -> GpuBenchmarkInfo:
    """Build a user-defined workload. Raises ConfigValidationError on bad values."""
    return GpuBenchmarkInfo(
        name=name,
        ops_per_item=ops_per_item,
        data_per_item_bytes=data_per_item_bytes,
        total_items=total_items,
        locality_factor=locality_factor,
        category=CUSTOM_BENCHMARK_KEY,
        intensity="User-defined",
        access_description="User-defined",
        applications="Custom workload modeling",
    )
