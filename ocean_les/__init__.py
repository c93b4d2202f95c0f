"""
Helpers shared by the ocean boundary-layer experiments.

The modules here are plain numpy/scipy/h5py code so they can be imported
(and tested) without Dedalus or MPI.

"""
